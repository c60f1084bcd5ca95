from inl_qt.widgets.plot_window import PlotWindow

__all__ = ["PlotWindow"]
