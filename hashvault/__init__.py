"""hashvault - content-addressed object store with main pointers and tags"""

__version__ = '0.1.0'
