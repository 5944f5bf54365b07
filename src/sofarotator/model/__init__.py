"""
The MODEL layer contains pure data structures and the geometry pipeline.
It has NO knowledge of the GUI (Qt).
It deals with 4D rotation, projection, cube assembly and animation state.
"""
