"""
Analysis 模块 - 图像统计

职责：
- 计算自适应增强所需的全局亮度与对比度
"""

from .statistics import StatisticsAnalyzer, analyze

__all__ = ["StatisticsAnalyzer", "analyze"]
