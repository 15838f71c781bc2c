# Statistics Module
"""
Summary statistics stored on every non-genesis block:
- Mean
- Median
- Spread (2 x population standard deviation)
"""
