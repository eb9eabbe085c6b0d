"""Rotating photo frame server: a slideshow of image URLs with a clock display."""
