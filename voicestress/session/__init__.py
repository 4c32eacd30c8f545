"""Calibration and analysis flows"""

from voicestress.session.calibration import CalibrationSession
from voicestress.session.analysis import AnalysisSession

__all__ = ['CalibrationSession', 'AnalysisSession']
