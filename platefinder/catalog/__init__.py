"""
Menu catalog persistence.

Responsibilities:
- Describe the scraped store -> category -> dish document.
- Load and save the single JSON catalog file.
- Merge freshly scraped categories into existing stores.
"""
