"""
The CONTROLLER layer turns rings into meshes and border lines and keeps the
border index consistent with the current globe parameters.
"""
