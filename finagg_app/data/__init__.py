"""
Provider data handling: query models, category registry, wire parameter
policy and columnar payload decoding.
"""
