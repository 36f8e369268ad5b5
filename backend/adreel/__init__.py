"""AdReel - campaign video ads from design templates with synchronized voiceover."""

__version__ = "1.0.0"
