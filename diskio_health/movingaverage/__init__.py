from .average import MovingAverage
