# src/pricefeed/__main__.py
from pricefeed.app import main

main()
