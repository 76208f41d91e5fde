"""Offline lookup table from Wikimedia page titles to Wikidata entity ids."""
