"""
Streambean Test Suite
=====================

Running Tests:
--------------
    pip install -e ".[test]"
    pytest
"""
