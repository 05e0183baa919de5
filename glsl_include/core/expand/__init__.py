"""Include expansion engine.

Splices registered sources in place of their directives, guards against
cycles and repeated includes, and records a source map as it goes.
"""
