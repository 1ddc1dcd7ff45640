"""
Core acquisition and launch logic.

`platform_resolver` maps the host to a Target Key, `BinaryAcquirer` turns that
key into a verified executable under `bin/`, and `launcher` relays every
`phantom` invocation to it. `paths` holds the location contract the acquirer
writes and the launcher reads.
"""
