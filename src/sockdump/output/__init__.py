"""Packet filtering and textual rendering."""
