"""Portfolio tracker: Argentine market quotes, investment valuation and simulators."""
