"""
Printable exports: PDF forms (ReportLab) and Excel reports (XlsxWriter).
"""
