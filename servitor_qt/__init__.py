"""
Servitor -- PySide6 front end for the kill team rules reference.

Package layout:
    services/   Application services (event bus, recents store, data source)
    widgets/    Reusable widget helpers (swipe gesture filter)
    main_window Faction browser window
    main        Entry point (window or headless outline)
"""
