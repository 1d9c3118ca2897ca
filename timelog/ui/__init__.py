from .main_window import MainWindow
from .log_widget import LogWidget
from .categories_widget import CategoriesWidget
from .quick_entry import QuickEntryWindow

__all__ = ["MainWindow", "LogWidget", "CategoriesWidget", "QuickEntryWindow"]
