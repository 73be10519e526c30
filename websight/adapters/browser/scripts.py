"""JavaScript sources evaluated inside the page.

Each constant is a single function expression passed to ``page.evaluate`` with
one JSON-serialisable argument. Results are plain data; no DOM handles cross
back into Python.
"""

from __future__ import annotations

# Elements whose textContent holds the query, in document order. The set is
# closed under ancestors, so parents always precede their children.
SNAPSHOT_SCRIPT = """
({ query, textLimit }) => {
    const all = Array.from(document.querySelectorAll('*'));
    const positions = new Map();
    all.forEach((el, i) => positions.set(el, i));
    const nodes = [];
    for (let i = 0; i < all.length; i++) {
        const el = all[i];
        const content = el.textContent || '';
        if (!content.includes(query)) continue;
        const trimmed = content.trim();
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        let depth = 0;
        for (let p = el.parentElement; p; p = p.parentElement) depth++;
        const parent = el.parentElement;
        nodes.push({
            index: i,
            parent: parent && positions.has(parent) ? positions.get(parent) : null,
            tag: el.tagName.toLowerCase(),
            depth,
            ownText: Array.from(el.childNodes)
                .filter(n => n.nodeType === Node.TEXT_NODE)
                .map(n => n.textContent || ''),
            text: trimmed.substring(0, textLimit),
            textLength: trimmed.length,
            containsQuery: true,
            id: el.id || '',
            className: typeof el.className === 'string' ? el.className : '',
            hasHref: el.hasAttribute('href'),
            role: el.getAttribute('role'),
            hasTabindex: el.hasAttribute('tabindex'),
            hasClickHandler: el instanceof HTMLElement && el.onclick !== null,
            cursor: style.cursor,
            display: style.display,
            visibility: style.visibility,
            width: rect.width,
            height: rect.height,
            disabled: el.hasAttribute('disabled'),
        });
    }
    return nodes;
}
"""

PROBE_SELECTOR_SCRIPT = """
({ selector, textLimit }) => {
    const el = document.querySelector(selector);
    if (!el) return null;
    const rect = el.getBoundingClientRect();
    const style = window.getComputedStyle(el);
    return {
        index: Array.prototype.indexOf.call(document.querySelectorAll('*'), el),
        tag: el.tagName.toLowerCase(),
        text: (el.textContent || '').substring(0, textLimit),
        id: el.id || '',
        className: typeof el.className === 'string' ? el.className : '',
        width: rect.width,
        height: rect.height,
        display: style.display,
        visibility: style.visibility,
        disabled: el.hasAttribute('disabled'),
    };
}
"""

# Runs the strategy chain for one element. Stages are tried in the given order;
# the first that does not throw wins and every attempt is reported back.
INTERACT_SCRIPT = """
({ target, kind, strategies, textLimit }) => {
    let el = null;
    if (target.index !== undefined) {
        el = document.querySelectorAll('*')[target.index] || null;
        if (!el || el.tagName.toLowerCase() !== target.tag) {
            return { status: 'stale' };
        }
    } else if (target.selector !== undefined) {
        el = document.querySelector(target.selector);
    } else {
        el = document.elementFromPoint(target.x, target.y);
    }
    if (!el) return { status: 'not_found' };

    const rect = el.getBoundingClientRect();
    const x = target.x !== undefined ? target.x : rect.left + rect.width / 2;
    const y = target.y !== undefined ? target.y : rect.top + rect.height / 2;
    const descriptor = {
        tagName: el.tagName,
        id: el.id || '',
        className: typeof el.className === 'string' ? el.className : '',
        text: el.textContent ? el.textContent.substring(0, textLimit) : null,
    };

    if (kind === 'click') {
        const link = el.closest('a');
        if (link) {
            link.removeAttribute('target');
            window.open = function (url) {
                if (url) window.location.href = String(url);
                return null;
            };
        }
    }

    const mouse = (type, bubbles) => new MouseEvent(type, {
        view: window, bubbles, cancelable: true, clientX: x, clientY: y,
    });
    const pointer = (type, bubbles) => new PointerEvent(type, {
        view: window, bubbles, cancelable: true, clientX: x, clientY: y,
    });
    const stages = {
        click: {
            native: () => {
                if (typeof el.click !== 'function') throw new Error('element has no native click');
                el.click();
            },
            synthetic_pointer_events: () => { el.dispatchEvent(mouse('click', true)); },
            bare_event: () => { el.dispatchEvent(new Event('click', { bubbles: true })); },
        },
        hover: {
            native: () => {
                el.dispatchEvent(mouse('mousemove', true));
                el.dispatchEvent(mouse('mouseover', true));
                el.dispatchEvent(mouse('mouseenter', false));
            },
            synthetic_pointer_events: () => {
                el.dispatchEvent(pointer('pointermove', true));
                el.dispatchEvent(pointer('pointerover', true));
                el.dispatchEvent(pointer('pointerenter', false));
            },
            bare_event: () => { el.dispatchEvent(new Event('mouseover', { bubbles: true })); },
        },
    };

    const attempts = [];
    for (const strategy of strategies) {
        try {
            stages[kind][strategy]();
            attempts.push({ strategy, ok: true });
            return { status: 'ok', strategy, attempts, descriptor, x, y };
        } catch (err) {
            attempts.push({ strategy, ok: false, error: String((err && err.message) || err) });
        }
    }
    return { status: 'failed', attempts, descriptor, x, y };
}
"""

SCROLL_INTO_VIEW_SCRIPT = """
({ index, tag, smooth }) => {
    const el = document.querySelectorAll('*')[index];
    if (!el || el.tagName.toLowerCase() !== tag) return null;
    el.scrollIntoView({ behavior: smooth ? 'smooth' : 'auto', block: 'center' });
    return {
        tagName: el.tagName,
        id: el.id || '',
        className: typeof el.className === 'string' ? el.className : '',
    };
}
"""

SCROLL_TO_SCRIPT = """
({ top, smooth }) => {
    const y = top === null ? document.body.scrollHeight : top;
    window.scrollTo({ top: y, behavior: smooth ? 'smooth' : 'auto' });
}
"""

SCROLL_BY_SCRIPT = """
({ top, smooth }) => {
    window.scrollBy({ top, behavior: smooth ? 'smooth' : 'auto' });
}
"""

SCROLL_POSITION_SCRIPT = """
() => ({
    x: window.scrollX,
    y: window.scrollY,
    height: document.documentElement.scrollHeight,
    viewportHeight: window.innerHeight,
})
"""

# Fills each field in turn; a field is located by CSS selector or, with
# useLabel, by label text, placeholder, aria-label or name (case-insensitive).
FILL_FIELDS_SCRIPT = """
({ fields }) => {
    const findInputByLabel = (text) => {
        const needle = text.toLowerCase();
        for (const label of Array.from(document.querySelectorAll('label'))) {
            if (!(label.textContent || '').trim().toLowerCase().includes(needle)) continue;
            const forId = label.getAttribute('for');
            if (forId) {
                const byId = document.getElementById(forId);
                if (byId) return byId;
            }
            const nested = label.querySelector('input, textarea, select');
            if (nested) return nested;
        }
        for (const input of Array.from(document.querySelectorAll('input, textarea, select'))) {
            for (const attr of ['placeholder', 'aria-label', 'name']) {
                const value = input.getAttribute(attr);
                if (value && value.toLowerCase().includes(needle)) return input;
            }
        }
        return null;
    };

    const results = [];
    for (const field of fields) {
        const input = field.useLabel
            ? findInputByLabel(field.selector)
            : document.querySelector(field.selector);
        if (!input) {
            results.push({ selector: field.selector, filled: false, reason: 'not_found' });
            continue;
        }
        const tagName = input.tagName.toLowerCase();
        const type = input.getAttribute('type') || 'text';
        const info = {
            selector: field.selector,
            tagName: input.tagName,
            type,
            id: input.id || '',
            name: input.getAttribute('name') || '',
        };
        try {
            if (tagName === 'select') {
                const option = Array.from(input.options).find(
                    opt => opt.value === field.value || opt.text === field.value
                );
                if (!option) {
                    results.push({ ...info, filled: false, reason: 'option_not_found' });
                    continue;
                }
                input.value = option.value;
                input.dispatchEvent(new Event('change', { bubbles: true }));
            } else if (type === 'checkbox' || type === 'radio') {
                const lowered = field.value.toLowerCase();
                if (lowered === 'true' || field.value === '1') input.checked = true;
                else if (lowered === 'false' || field.value === '0') input.checked = false;
                input.dispatchEvent(new Event('change', { bubbles: true }));
            } else {
                input.focus();
                input.value = field.value;
                input.dispatchEvent(new Event('input', { bubbles: true }));
                input.dispatchEvent(new Event('change', { bubbles: true }));
                input.blur();
            }
            results.push({ ...info, filled: true });
        } catch (err) {
            results.push({ ...info, filled: false, reason: 'error', error: String((err && err.message) || err) });
        }
    }
    return results;
}
"""

EXTRACT_HTML_SCRIPT = """
({ selector, clean, viewport }) => {
    const strip = (node) => {
        if (!clean) return node;
        node.querySelectorAll('script, style, noscript').forEach(el => el.remove());
        node.querySelectorAll('[style*="display: none"]').forEach(el => el.remove());
        node.querySelectorAll('[hidden]').forEach(el => el.remove());
        return node;
    };
    let elements = Array.from(document.querySelectorAll(selector));
    const total = elements.length;
    if (viewport) {
        const viewportHeight = window.innerHeight;
        elements = elements.filter(el => {
            const rect = el.getBoundingClientRect();
            return rect.bottom > 0 && rect.top < viewportHeight && rect.height > 0;
        });
    }
    if (elements.length === 0) return { total, html: '' };
    if (elements.length === 1 && !viewport) {
        return { total, html: strip(elements[0].cloneNode(true)).outerHTML };
    }
    const container = document.createElement('div');
    elements.forEach(el => container.appendChild(strip(el.cloneNode(true))));
    return { total, html: container.innerHTML };
}
"""

ELEMENT_HTML_SCRIPT = """
({ index, tag, clean }) => {
    const el = document.querySelectorAll('*')[index];
    if (!el || el.tagName.toLowerCase() !== tag) return null;
    const clone = el.cloneNode(true);
    if (clean) {
        clone.querySelectorAll('script, style, noscript').forEach(node => node.remove());
        clone.querySelectorAll('[style*="display: none"]').forEach(node => node.remove());
        clone.querySelectorAll('[hidden]').forEach(node => node.remove());
    }
    return clone.outerHTML;
}
"""

# Compiles the code as an expression first, then as a statement body. The
# fallback only applies to code that does not compile, so it runs at most once.
EXECUTE_JAVASCRIPT_SCRIPT = """
(code) => {
    let fn;
    try {
        fn = new Function('return ' + code);
    } catch {
        try {
            fn = new Function(code);
        } catch (err) {
            return { success: false, error: err instanceof Error ? err.message : String(err) };
        }
    }
    try {
        const result = fn();
        return { success: true, result, type: typeof result };
    } catch (err) {
        return { success: false, error: err instanceof Error ? err.message : String(err) };
    }
}
"""

GET_ELEMENTS_SCRIPT = """
({ selector, scope, textLimit }) => {
    const inViewport = (rect) =>
        rect.top >= 0 &&
        rect.left >= 0 &&
        rect.bottom <= (window.innerHeight || document.documentElement.clientHeight) &&
        rect.right <= (window.innerWidth || document.documentElement.clientWidth) &&
        rect.width > 0 &&
        rect.height > 0;
    const elements = Array.from(document.querySelectorAll(selector)).filter(
        el => scope !== 'viewport' || inViewport(el.getBoundingClientRect())
    );
    return elements.map((el) => {
        const rect = el.getBoundingClientRect();
        return {
            tagName: el.tagName.toLowerCase(),
            type: el.type || null,
            text: (el.textContent || '').trim().substring(0, textLimit),
            href: el.href || null,
            value: el.value || null,
            placeholder: el.placeholder || null,
            ariaLabel: el.getAttribute('aria-label'),
            className: typeof el.className === 'string' ? el.className : null,
            id: el.id || null,
            x: Math.round(rect.left + rect.width / 2),
            y: Math.round(rect.top + rect.height / 2),
        };
    });
}
"""

# Computed style values for the first ``maxElements`` matches. ``properties``
# null means every computed property. Values equal to the parent's are skipped
# unless includeInherited is set, as are empty and default-like values.
COMPUTED_STYLES_SCRIPT = """
({ selector, properties, includeInherited, maxElements }) => {
    const elements = document.querySelectorAll(selector);
    const skipped = new Set(['initial', 'normal', 'none', 'auto']);
    const processed = Math.min(elements.length, maxElements);
    const results = [];
    for (let i = 0; i < processed; i++) {
        const el = elements[i];
        const computed = window.getComputedStyle(el);
        const parentStyle = el.parentElement ? window.getComputedStyle(el.parentElement) : null;
        const names = properties === null ? Array.from(computed) : properties;
        const styles = [];
        for (const name of names) {
            const value = computed.getPropertyValue(name);
            if (!includeInherited && parentStyle && parentStyle.getPropertyValue(name) === value) continue;
            if (!value || skipped.has(value)) continue;
            styles.push({ name, value });
        }
        const rect = el.getBoundingClientRect();
        const className = typeof el.className === 'string' ? el.className : '';
        const text = (el.textContent || '').trim();
        results.push({
            tag: el.tagName.toLowerCase(),
            id: el.id || '',
            className,
            text: text.length > 0 && text.length < 100 ? text : null,
            styles,
            boundingBox: {
                x: Math.round(rect.x),
                y: Math.round(rect.y),
                width: Math.round(rect.width),
                height: Math.round(rect.height),
            },
        });
    }
    return { found: elements.length, processed, elements: results };
}
"""

PAGE_DIMENSIONS_SCRIPT = """
() => ({
    width: document.documentElement.scrollWidth,
    height: document.documentElement.scrollHeight,
    viewportWidth: window.innerWidth,
    viewportHeight: window.innerHeight,
})
"""

PAGE_METADATA_SCRIPT = """
() => {
    const meta = (name) => {
        const el = document.querySelector(`meta[name="${name}"]`);
        return (el && el.getAttribute('content')) || null;
    };
    return {
        title: document.title,
        url: window.location.href,
        dimensions: {
            scrollWidth: document.documentElement.scrollWidth,
            scrollHeight: document.documentElement.scrollHeight,
            viewportWidth: window.innerWidth,
            viewportHeight: window.innerHeight,
        },
        meta: {
            description: meta('description'),
            keywords: meta('keywords'),
            author: meta('author'),
            viewport: meta('viewport'),
        },
    };
}
"""

PAGE_TEXT_SCRIPT = """
() => {
    if (!document.body) return '';
    const walker = document.createTreeWalker(document.body, NodeFilter.SHOW_TEXT, {
        acceptNode: (node) => {
            const parent = node.parentElement;
            if (!parent) return NodeFilter.FILTER_REJECT;
            if (['script', 'style', 'noscript'].includes(parent.tagName.toLowerCase())) {
                return NodeFilter.FILTER_REJECT;
            }
            return node.textContent && node.textContent.trim()
                ? NodeFilter.FILTER_ACCEPT
                : NodeFilter.FILTER_REJECT;
        },
    });
    const texts = [];
    let node;
    while ((node = walker.nextNode())) texts.push(node.textContent.trim());
    return texts.join(' ').replace(/\\s+/g, ' ');
}
"""
