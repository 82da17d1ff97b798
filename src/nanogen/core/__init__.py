"""
Core modules for nanogen.

This package contains the core logic for:
- Configuration management
- The request adapter (building requests, decoding responses)
- The submission state machine and session
- Source image loading and result saving
"""
