from .errors      import (TransactionError, ParseError, DerivationError, MissingKeyError, IndicesNotFoundError,
                          InvalidFrameError, FrameIndexError, InterpolationError, NotInitializedError)
from .dom         import Element, parse, parse_attributes, get_attribute, compile_selector, iter_elements, query_selector, query_selector_all
from .models      import KeyMaterial, IndexSet
from .encoding    import float_to_hex, is_odd, base64_encode, base64_decode
from .cubic       import Cubic, start_gradient, end_gradient
from .interpolate import interpolate, convert_rotation_to_matrix, convert_rotation_to_extended_matrix
from .extractor   import get_key, get_key_bytes, find_ondemand_url, parse_indices, get_indices, get_frames, get_frame, extract_numbers
from .signature   import solve_value, get_frame_time, animate, get_animation_key, generate_transaction_id
from .config      import TransactionConfig
