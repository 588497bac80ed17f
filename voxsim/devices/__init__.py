"""
Synthetic domains used as geometric input of the simulation setups.
"""

from .flow_device import SimpleFlowDevice
from .cantilever import CantileverBeam
from .wheel import SimpleWheel
