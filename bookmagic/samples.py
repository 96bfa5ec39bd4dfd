"""
Placeholder and sample documents.

Every text here says plainly that it is a preview or placeholder, so it can
never be mistaken for the user's formatted manuscript.

MIT License - Copyright (c) 2025 BookMagic
"""


def docx_placeholder_markdown(file_name: str, size_bytes: int) -> str:
    """Stand-in content for a .docx file that could not be parsed."""
    size_kb = round(size_bytes / 1024)
    return f"""# Document from {file_name}

This document was uploaded as a .docx file ({size_kb}KB).

## Chapter One: Professional Formatting Preview

Your uploaded .docx file has been detected and is ready for conversion. This preview demonstrates how your content will be formatted with professional book styling.

### Key Features:
- **Typography**: Clean, readable fonts optimized for book publishing
- **Layout**: Proper margins, spacing, and paragraph formatting
- **Headers**: Hierarchical styling for chapters and sections
- **Text Flow**: Justified alignment with appropriate line spacing

## Chapter Two: Template Styling

The selected template provides:
- Professional page layout
- Consistent typography throughout
- Print-ready formatting standards
- Digital reading optimization

### Sample Content Formatting

This paragraph demonstrates how your body text will appear. The formatting includes proper paragraph spacing, text justification, and professional typography that meets publishing industry standards.

> Block quotes like this one will be formatted with appropriate styling to distinguish them from regular text.

## Chapter Three: Export Ready

Once you're satisfied with the preview, the export process will:
1. Convert your complete .docx content
2. Apply the selected template styling
3. Generate print-ready PDF and EPUB files
4. Include all necessary publishing assets

*Note: This is a placeholder preview for your uploaded {file_name}. Install Pandoc to convert the actual document content.*"""


def unsupported_format_markdown(extension: str) -> str:
    return f"""# Unsupported File Format

The uploaded file format ({extension or 'no extension'}) cannot be converted. Please upload a .docx, .md or .rtf file.

Supported formats:
- .docx (Microsoft Word)
- .md (Markdown)
- .rtf (Rich Text Format)"""


def conversion_error_markdown(file_name: str, error_message: str) -> str:
    return f"""# Conversion Error

There was an error processing your file {file_name}: {error_message}

This placeholder page is shown instead of your manuscript. Please try uploading the file again."""


def sample_manuscript_markdown(project_id: str) -> str:
    """Demo manuscript used when a project is exported without an upload."""
    title = project_id[:1].upper() + project_id[1:]
    return f"""# {title} - Sample Manuscript

This is a sample manuscript for project **{project_id}**. No file has been uploaded yet, so this demo content stands in for your book.

## Chapter One: The Beginning

Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat.

Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt mollit anim id est laborum.

## Chapter Two: The Development

Sed ut perspiciatis unde omnis iste natus error sit voluptatem accusantium doloremque laudantium, totam rem aperiam, eaque ipsa quae ab illo inventore veritatis et quasi architecto beatae vitae dicta sunt explicabo.

Nemo enim ipsam voluptatem quia voluptas sit aspernatur aut odit aut fugit, sed quia consequuntur magni dolores eos qui ratione voluptatem sequi nesciunt.

### A Subsection

At vero eos et accusamus et iusto odio dignissimos ducimus qui blanditiis praesentium voluptatum deleniti atque corrupti quos dolores et quas molestias excepturi sint occaecati cupiditate non provident.

## Chapter Three: The Resolution

Similique sunt in culpa qui officia deserunt mollitia animi, id est laborum et dolorum fuga. Et harum quidem rerum facilis est et expedita distinctio.

Nam libero tempore, cum soluta nobis est eligendi optio cumque nihil impedit quo minus id quod maxime placeat facere possimus, omnis voluptas assumenda est, omnis dolor repellendus.

## Conclusion

This completes the sample manuscript. Upload your own .docx, .md or .rtf file to replace this demo content.

*Generated by BookMagic - Professional Book Formatting*
"""


FONT_LICENSE_TEXT = """Font License Agreement

This package includes fonts that are licensed for use in published books.

Included Fonts:
- EB Garamond (Open Font License)
- Lora (Open Font License)
- Source Serif Pro (Open Font License)

These fonts are free to use for both personal and commercial projects.
For more information, visit the respective font foundries.

Generated by BookMagic - Professional Book Formatting
"""

KDP_CHECKLIST_TEXT = """KDP Publishing Checklist

[ ] Manuscript formatted with professional template
[ ] Proper page margins and spacing
[ ] Consistent typography throughout
[ ] Table of contents generated
[ ] Print-ready PDF created
[ ] EPUB file validated
[ ] Font licenses included
[ ] Ready for upload to KDP

Generated by BookMagic
Visit https://kdp.amazon.com for publishing guidelines
"""


def epub_placeholder_text(project_id: str, plain_text: str, limit: int = 500) -> str:
    """Body of the plain-text file written when no real EPUB can be produced."""
    return f"""EPUB File for {project_id}

This is a placeholder EPUB file generated by BookMagic.
It is plain text, not a valid EPUB container. Install Pandoc to produce a real EPUB.

Content Preview:
{plain_text[:limit]}...

Generated by BookMagic - Professional Book Formatting
"""
