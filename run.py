#!/usr/bin/env python3
"""
Runner for the Oil & Gas production ETL job.
Equivalent to the ``oilgas-etl`` console script.
"""
import sys

from oilgas_etl.main import main

if __name__ == "__main__":
    sys.exit(main())
