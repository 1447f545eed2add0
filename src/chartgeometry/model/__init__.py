"""
The MODEL layer contains pure data structures: the input records a caller
supplies and the geometry descriptors the layout functions return.
It has NO knowledge of any renderer.
"""
