"""Static CSS emitted ahead of the generated utilities."""

PREFLIGHT = r"""
*, ::before, ::after { box-sizing: border-box; border-width: 0; border-style: solid; border-color: currentColor; }

html { line-height: 1.5; -webkit-text-size-adjust: 100%; tab-size: 4; }

body { margin: 0; line-height: inherit; text-rendering: optimizeLegibility; -webkit-font-smoothing: antialiased; }

h1, h2, h3, h4, h5, h6 { font-size: inherit; font-weight: inherit; margin: 0; }

p, blockquote, figure, pre, dl, dd, hr { margin: 0; }

ol, ul { list-style: none; margin: 0; padding: 0; }

a { color: inherit; text-decoration: inherit; }

code, kbd, samp, pre { font-family: var(--font-mono); font-size: 1em; }

img, svg, video { display: block; max-width: 100%; height: auto; }

table { border-collapse: collapse; text-indent: 0; border-color: inherit; }

hr { height: 0; color: inherit; border-top-width: 1px; }

@media print {
  body { background: #fff; color: #000; }
  .link .footnote::before { content: " ("; }
  .link .footnote::after { content: ")"; }
  .footnote { font-size: 0.75em; word-break: break-all; }
}
"""

# {link_border} is filled from the design system.
PROSE = r"""
.prose { color: #374151; max-width: 65ch; font-size: 1rem; line-height: 1.75; }
.prose :where(p) { margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(a) { color: inherit; font-weight: inherit; text-decoration: none; border-bottom-width: 1px; border-bottom-color: {link_border}; }
.prose :where(strong) { color: #111827; font-weight: 600; }
.prose :where(h1) { color: #111827; font-weight: 800; font-size: 2.25em; margin-top: 0; margin-bottom: 0.8888889em; line-height: 1.1111111; }
.prose :where(h2) { color: #111827; font-weight: 700; font-size: 1.5em; margin-top: 2em; margin-bottom: 1em; line-height: 1.3333333; }
.prose :where(h3) { color: #111827; font-weight: 600; font-size: 1.25em; margin-top: 1.6em; margin-bottom: 0.6em; line-height: 1.6; }
.prose :where(ul) { list-style-type: disc; padding-left: 1.625em; margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(ol) { list-style-type: decimal; padding-left: 1.625em; margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(li) { margin-top: 0.5em; margin-bottom: 0.5em; }
.prose :where(blockquote) { font-style: italic; color: #111827; border-left: 0.25rem solid #e5e7eb; padding-left: 1em; margin: 1.6em 0; }
.prose :where(code) { color: #111827; font-weight: 300; font-size: 0.875em; }
.prose :where(pre) { color: #e5e7eb; background-color: #1f2937; overflow-x: auto; font-size: 0.875em; line-height: 1.375; margin-top: 1.7142857em; margin-bottom: 1.7142857em; border-radius: 0.375rem; padding: 0.8571429em 1.1428571em; }
.prose :where(pre code) { background-color: transparent; border-width: 0; border-radius: 0; padding: 0; font-weight: 300; color: inherit; line-height: 1.5em; }
.prose :where(table) { width: 100%; table-layout: auto; text-align: left; margin-top: 2em; margin-bottom: 2em; font-size: 0.875em; line-height: 1.7142857; }
.prose :where(thead th) { color: #111827; font-weight: 600; padding: 0 0.5714286em 0.5714286em; }
.prose :where(tbody td) { padding: 0.5714286em; vertical-align: baseline; }
.prose :where(img) { margin-top: 2em; margin-bottom: 2em; }
.prose :where(hr) { border-color: #e5e7eb; margin-top: 3em; margin-bottom: 3em; }
"""
