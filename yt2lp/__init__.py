"""
yt2lp - convert YouTube videos to custom MP3 albums.

Downloads the audio of one video and splits it into tagged tracks using the
timestamps found in its description: timestamp parsing → segment planning →
full-audio download → per-track extraction and tagging.
"""

__version__ = "0.1.0"
