"""
The LAYOUT layer turns input records into geometry descriptors.
Every function here is pure: same input, same output, no renderer involved.
"""
