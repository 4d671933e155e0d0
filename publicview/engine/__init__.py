# publicview/engine/__init__.py

"""Engine package providing the redactor, type descriptors, views and encoders.

This package contains the structural redaction walk and the JSON and XML
encoders that feed its output to the marshaling libraries.
"""
