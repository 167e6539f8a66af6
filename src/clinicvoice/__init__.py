"""
ClinicVoice: voice-driven clinical form capture

Continuous speech capture feeding an LLM extraction endpoint that maps
free-form dictation onto structured visit forms, plus the visit/form
service those forms are saved into.
"""

__version__ = "0.1.0"
__author__ = "ClinicVoice Team"
__description__ = "Voice-driven clinical form capture"
