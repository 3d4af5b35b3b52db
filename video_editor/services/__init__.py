"""
Services that carry out a request: locating the input, building the ffmpeg
command, running it and producing thumbnails, plus the host collaborators they
depend on.
"""
