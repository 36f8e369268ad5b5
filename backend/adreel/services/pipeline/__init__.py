"""
Pipeline package

- assembly: ffmpeg merge of narration into exported videos
- creative: single-creative stages and campaign orchestration
"""
