"""Packaging for FocusKey.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": True,  # deliver focuskey.app links as argv
    "iconfile": None,
    "plist": {
        "CFBundleName": "FocusKey",
        "CFBundleDisplayName": "FocusKey",
        "CFBundleIdentifier": "com.focuskey.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "LSMinimumSystemVersion": "13.0",
        "CFBundleURLTypes": [
            {"CFBundleURLName": "FocusKey", "CFBundleURLSchemes": ["focuskey"]},
        ],
    },
}

extra = {}
if "py2app" in sys.argv:
    extra = dict(
        app=APP,
        data_files=DATA_FILES,
        options={"py2app": OPTIONS},
        setup_requires=["py2app"],
    )

setup(
    name="FocusKey",
    version="0.1.0",
    packages=find_packages(include=["focuskey", "focuskey.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
    ],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["focuskey=focuskey.__main__:main"]},
    **extra,
)
