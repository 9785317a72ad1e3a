"""
Plate Finder: budget-fitting dish combinations across scraped restaurant menus.
"""
