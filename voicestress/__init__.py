"""VoiceStress: acoustic baseline and voice-stress biomarker pipeline"""

__version__ = "0.1.0"
