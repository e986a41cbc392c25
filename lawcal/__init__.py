"""lawcal - 法律事務所向けカレンダー / 期日管理エンジン"""

__version__ = "1.0.0"
