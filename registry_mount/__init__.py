"""
Registry storage supervisor: mounts a SeaweedFS filer for an image
registry and tears the mount down on shutdown.
"""

__version__ = "0.1.0"
