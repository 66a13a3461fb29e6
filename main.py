#!/usr/bin/env python3
"""
Student Notes

Command line front end for the note entry store.
"""

from studentnotes.cli.main import main

if __name__ == "__main__":
    main()
