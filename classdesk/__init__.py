"""classdesk - School Table Views Service.

Serves tabular views over school records:
- Table definitions (columns, search keys, export names)
- Search / sort / paginate projections with grid and card layouts
- CSV export of the filtered and sorted rows
"""

__version__ = "0.1.0"
