"""Service layer: name matching, scoring, share links and feed access.

Everything except ``feed_client`` and ``pokedex_catalog`` is pure and does no
I/O; those two own the network and hand resolved data to the rest.
"""
