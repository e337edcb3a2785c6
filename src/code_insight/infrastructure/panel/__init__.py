from code_insight.infrastructure.panel.panel_channel import PanelChannel

__all__ = ["PanelChannel"]
