"""
POS catalog reconciler: Toast, DoorDash and Square exports into one model.
"""
