"""
CMS API test suites package.

This repository keeps `cms_testsuites` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - resource clients and test modules importing the framework

No production secrets live here; tokens come from the environment.
"""
