"""
Tactile Braille Tutor — learn six-dot Braille by touch.

Text → Grade-2 aware Braille cells → pointer exploration with per-dot haptic confirmation.
Designed for sighted and low-vision learners practising tactile Braille reading.
"""

__version__ = "1.0.0"
__author__ = "Tactile Braille Tutor Team"
