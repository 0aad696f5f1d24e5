"""
The MODEL layer contains pure data structures and geometry.
It has NO knowledge of the Visualization (PyVista).
It deals with coordinates, rings, projection and dataset I/O.
"""
