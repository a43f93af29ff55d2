"""
Common utility functions for Modelize.
"""

# pylint: disable=line-too-long

import os
import jinja2


def type_name_of(name: str) -> str:
    """
    Derive a type name from a document key.

    The name is split on underscores and the first character of every
    segment is upper-cased. The remaining characters are kept as they are,
    so deriving a type name from a derived type name is a no-op.

    Args:
        name (str): The raw key, e.g. 'owner_name'.

    Returns:
        str: The type name, e.g. 'OwnerName'.
    """
    return ''.join(segment[:1].upper() + segment[1:] for segment in name.split('_'))


def property_name_of(name: str) -> str:
    """
    Derive a property name from a document key.

    Args:
        name (str): The raw key, e.g. 'owner_name'.

    Returns:
        str: The type name with a lower-cased first character, e.g. 'ownerName'.
    """
    type_name = type_name_of(name)
    if not type_name:
        return name
    return type_name[0].lower() + type_name[1:]


def singular_form_of(name: str) -> str:
    """Drop the last character of a plural key ('tags' -> 'tag')."""
    return name[:-1]


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the file, relative to the package directory.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)
    template_env.filters['type_name'] = type_name_of

    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def render_template(template: str, output: str, **kvargs):
    """ 
    Render a template and write it to a file
    
    Args:
        template (str): The template to render.
        output (str): The output file path.
        **kvargs: The keyword arguments to pass to the template.
        
    Returns:
        None 
    """
    out = process_template(template, **kvargs)
    output_dir = os.path.dirname(output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        f.write(out)
