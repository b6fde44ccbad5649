#!/usr/bin/env python3
"""
Guahh Auth - Main entry point

This is a simple launcher that runs the guahh_auth package as a module.
"""

if __name__ == "__main__":
    import runpy

    # Run the guahh_auth package as a module
    runpy.run_module("guahh_auth", run_name="__main__", alter_sys=True)
