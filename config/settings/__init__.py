"""Settings package for the slot booking service.

`base.py` holds configuration shared by every environment; `dev.py`,
`prod.py` and `test.py` override it for their environment.
"""
