"""
Core modules for the image operations facade

- engine_registry: EngineRegistry, selects the imaging back end
- engines: capability interface and one adapter per back end
- image: geometry, converters and the public ImageOperations
- exceptions: ImagingError hierarchy
"""
