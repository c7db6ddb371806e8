#!/usr/bin/env python3
"""Task Tracker - Run the application.

Usage:
    python run.py
    # Or: python -m tasktracker.app

The API will be available at http://localhost:5050/api
"""

from tasktracker.app import main

if __name__ == "__main__":
    main()
