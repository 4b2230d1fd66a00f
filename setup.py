"""
Setup file.
"""

from setuptools import setup

KEYWORDS = "electron node-gyp electron-rebuild native addon bundler substitution"


if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        include_package_data=True)
