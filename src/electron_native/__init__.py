"""electron-native - rebuild native Node modules for Electron bundles."""

__version__ = "0.1.0"
