"""
solvefield: batch astrometric solving of images and coordinate lists, by
coordinating the astrometry.net command-line programs.
"""
