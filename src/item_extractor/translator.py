#!/usr/bin/env python3
"""
English to Chinese translation of item descriptions.

This runs after extraction. It replaces descriptions of already validated items
without validating them again.
"""

import logging
import re
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional

import requests

from .models import ExtractedItem

logger = logging.getLogger(__name__)

MYMEMORY_URL = "https://api.mymemory.translated.net/get"

TECHNICAL_TERMS = {
    'cable': '电缆',
    'wire': '电线',
    'connector': '连接器',
    'adapter': '适配器',
    'charger': '充电器',
    'battery': '电池',
    'screen': '屏幕',
    'display': '显示器',
    'keyboard': '键盘',
    'mouse': '鼠标',
    'speaker': '扬声器',
    'microphone': '麦克风',
    'camera': '摄像头',
    'sensor': '传感器',
    'processor': '处理器',
    'memory': '内存',
    'storage': '存储',
    'hard drive': '硬盘',
    'solid state drive': '固态硬盘',
    'motherboard': '主板',
    'graphics card': '显卡',
    'power supply': '电源',
    'cooling fan': '散热风扇',
    'heat sink': '散热器',
    'case': '机箱',
    'monitor': '显示器',
    'printer': '打印机',
    'scanner': '扫描仪',
    'router': '路由器',
    'switch': '交换机',
    'modem': '调制解调器',
    'ethernet': '以太网',
    'wifi': '无线网络',
    'bluetooth': '蓝牙',
    'usb': 'USB',
    'hdmi': 'HDMI',
    'audio': '音频',
    'video': '视频',
    'software': '软件',
    'hardware': '硬件',
    'driver': '驱动程序',
    'firmware': '固件',
    'operating system': '操作系统',
    'application': '应用程序',
    'database': '数据库',
    'server': '服务器',
    'network': '网络',
    'internet': '互联网',
    'website': '网站',
    'email': '电子邮件',
    'file': '文件',
    'folder': '文件夹',
    'document': '文档',
    'image': '图像',
    'photo': '照片',
    'picture': '图片',
    'music': '音乐',
    'sound': '声音',
}

_LATIN = re.compile(r'[a-zA-Z]')


class DescriptionTranslator:
    """
    Translates descriptions with a technical-term dictionary, falling back to
    the MyMemory API. Results are cached per instance; any failure returns the
    original text.
    """

    def __init__(self, use_api: bool = True, timeout: float = 10.0,
                 session: Optional[requests.Session] = None,
                 terms: Optional[Dict[str, str]] = None):
        self.use_api = use_api
        self.timeout = timeout
        self.session = session or requests.Session()
        self.terms = TECHNICAL_TERMS if terms is None else terms
        self.cache: Dict[str, str] = {}

    def __call__(self, text: str) -> str:
        return self.translate(text)

    def translate(self, text: str) -> str:
        if not text or not text.strip():
            return text

        exact = self.terms.get(text.lower())
        if exact:
            return exact

        substituted = text
        for english, chinese in self.terms.items():
            substituted = re.sub(rf'\b{re.escape(english)}\b', chinese, substituted, flags=re.IGNORECASE)

        # fully covered by the dictionary
        if substituted != text and not _LATIN.search(substituted):
            return substituted

        if not self.use_api:
            return substituted
        return self.translate_with_api(text)

    def translate_with_api(self, text: str) -> str:
        if text in self.cache:
            return self.cache[text]

        try:
            response = self.session.get(
                MYMEMORY_URL,
                params={'q': text, 'langpair': 'en|zh'},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Translation error for {text!r}: {e}")
            return text

        translated = (data.get('responseData') or {}).get('translatedText')
        if data.get('responseStatus') == 200 and translated:
            self.cache[text] = translated
            return translated

        logger.warning(f"Translation failed for: {text}")
        return text

    def clear_cache(self):
        self.cache.clear()


def translate_descriptions(
    items: List[ExtractedItem],
    translator: Callable[[str], str],
    progress: Optional[Callable[[int, int, str], None]] = None,
    delay: float = 0.5,
) -> List[ExtractedItem]:
    """
    Replace each item's description with its translation, in place.

    The list entries are swapped for copies carrying the new description; the
    other fields and the item order are untouched. No validation is applied to
    the translated text.

    Args:
        items: Items to update
        translator: Callable mapping a description to its translation
        progress: Called with (index, total, message) before each item
        delay: Seconds to wait between items, for API rate limits

    Returns:
        The same list object
    """
    total = len(items)
    for i, item in enumerate(items):
        if progress is not None:
            progress(i, total, f"Translating item {i + 1} of {total}...")

        items[i] = replace(item, description=translator(item.description))

        if delay and i < total - 1:
            time.sleep(delay)

    logger.info(f"Translated {total} descriptions")
    return items
