"""
Readers for the Rust side: declaration parser, style macro extractor and
directory scanner. Import the submodules directly.
"""
