"""\nCommand line interface.\n"""
