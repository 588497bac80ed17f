"""
voxsim: package domains and physical fields of a simulation setup into a
sparse multi-field voxel container, and read them back with validation.
"""
