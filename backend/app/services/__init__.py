"""
Services Layer

Rotation grid logic kept apart from the HTTP layer:
- pure layout transitions (column_layout, group_combiner, column_reorder, layout_actions)
- drag selection and view building (block_selector, rotation_grid_view)
- persistence behind the DataStore protocol (data_store, layout_save_scheduler)

Nothing here imports FastAPI request/response objects.
"""
