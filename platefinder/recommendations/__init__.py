"""
Dish combination recommendation engine.

Responsibilities:
- Normalize locale-formatted price strings ("119,40 MAD") to numbers and back.
- Flatten the store -> category -> dish catalog into priced dish entries.
- Search for dish combinations that fit a budget and a plate count.
- Regroup chosen dishes per store and category for API serialisation.
- Describe the catalog's price distribution.
"""
