"""
Intent Analyser - Command-line applications
"""
